"""
HTTP surfaces of the services.

- api.booking_app: booking service (bookings, payment webhook)
- api.payment_app: payment service simulator
- api.delivery_app: delivery service (mock channels)
"""
