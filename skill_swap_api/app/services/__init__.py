"""
Service layer.

Each service encapsulates the business rules of one domain and talks
to the store through the ``Database`` handle it is constructed with.
Services raise ``ServiceError`` subclasses; translating them into
HTTP responses is the job of the endpoints.
"""
