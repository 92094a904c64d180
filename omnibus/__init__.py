"""
OmniBus: a demo booking application for a fictional bus line.

Passengers search routes, pick a seat, enter their details and pay (mocked);
staff check passengers in from the admin console. Bookings persist as a single
JSON blob in a Valkey key, and an optional generative-text provider writes a
short marketing blurb for the selected destination.
"""

__version__ = "0.1.0"
