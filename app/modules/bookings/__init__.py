"""Booking, payment, messaging and review workflow notifications."""
