"""
Service layer abstraction.

Each service encapsulates the business rules for one kind of
submission.  Route handlers stay thin: they parse the request, call a
service and translate its result or exceptions into HTTP responses.
"""
