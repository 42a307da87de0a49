"""HR Portal package.

Employee attendance and HR self-service: feature modules (users, attendance,
leave, notifications, announcements) with a thin Flask JSON controller layer
over service/repository layers.
"""
