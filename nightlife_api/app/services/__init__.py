"""
Service layer.

Each service encapsulates the business logic for one concern (users,
venues, attendance, authentication, upstream APIs) so the HTTP
handlers stay thin.
"""
