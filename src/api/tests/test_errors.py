"""Tests for domain error to HTTP mapping."""

import unittest

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from api.errors import register_exception_handlers, status_for
from domain.model.errors import (
    DomainError,
    DuplicateError,
    InvalidOtpError,
    NotFoundError,
    OtpExpiredError,
    ProviderMismatchError,
    RateLimitedError,
    StorageError,
    TokenSigningError,
    UnauthorizedError,
    ValidationError,
)


class TestStatusFor(unittest.TestCase):

    def test_mapping(self):
        cases = [
            (ValidationError('x'), 400),
            (DuplicateError('x'), 400),
            (ProviderMismatchError('x'), 400),
            (InvalidOtpError('x'), 400),
            (OtpExpiredError('x'), 400),
            (NotFoundError('x'), 404),
            (UnauthorizedError('x'), 401),
            (RateLimitedError(5), 429),
            (StorageError('x'), 500),
            (TokenSigningError('x'), 500),
            (DomainError('x'), 500),
        ]
        for exc, expected in cases:
            with self.subTest(error=type(exc).__name__):
                self.assertEqual(status_for(exc), expected)


class TestExceptionHandlers(unittest.TestCase):

    def setUp(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get('/validation')
        async def validation():
            raise ValidationError('Title and content are required')

        @app.get('/storage')
        async def storage():
            raise StorageError('connection reset by peer at 10.0.0.5')

        @app.get('/rate-limited')
        async def rate_limited():
            raise RateLimitedError(42)

        @app.get('/unauthorized')
        async def unauthorized():
            raise UnauthorizedError('Invalid or expired token')

        @app.get('/http')
        async def http():
            raise HTTPException(status_code=503, detail='Database unavailable')

        @app.get('/crash')
        async def crash():
            raise RuntimeError('secret internals')

        self.client = TestClient(app, raise_server_exceptions=False)

    def test_client_error_message_is_passed_through(self):
        response = self.client.get('/validation')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'message': 'Title and content are required'})

    def test_server_error_details_are_hidden(self):
        response = self.client.get('/storage')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Server error'})

    def test_rate_limited_sets_retry_after(self):
        response = self.client.get('/rate-limited')

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.headers['Retry-After'], '42')

    def test_unauthorized_sets_challenge(self):
        response = self.client.get('/unauthorized')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers['WWW-Authenticate'], 'Bearer')

    def test_http_exception_uses_message_shape(self):
        response = self.client.get('/http')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json(), {'message': 'Database unavailable'})

    def test_unknown_route(self):
        response = self.client.get('/nope')

        self.assertEqual(response.status_code, 404)
        self.assertIn('message', response.json())

    def test_unexpected_exception(self):
        response = self.client.get('/crash')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Server error'})


if __name__ == '__main__':
    unittest.main()
