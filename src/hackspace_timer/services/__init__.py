"""Services for publishing the occupancy status and running the countdown."""
