"""School Attendance package.

Weekly class timetables with teacher/section conflict detection, and the
registrar's enrollment approval workflow. Organized by feature modules
(schedules, sections, enrollments, assignments, ...) with a thin Flask JSON
controller layer over service/repository layers sharing one unit of work.
"""
