"""Attendance engine package.

Organized by feature modules (schedules, attendance, allocations) with
service/repository layers. The domain core (time codec, settings resolution,
lateness evaluation, weekend derivation, allocation guard) is pure and works
against repository interfaces injected by the caller.
"""
