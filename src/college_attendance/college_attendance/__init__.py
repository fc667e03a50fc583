"""College attendance package.

Organized by feature modules (users, students, attendance, reports, ...)
with thin Flask controllers over service/repository layers and an explicit
application state per signed-in user.
"""
