"""Version 1 of the Venue Booking API."""
