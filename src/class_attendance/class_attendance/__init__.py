"""Class Attendance package.

Feature modules (attendance, schedules, batch, reports, ...) expose thin Flask
controllers on top of service/repository layers. The services hold every
verification and reconciliation rule; the repositories only persist.
"""

__version__ = "0.1.0"
