"""RideConnect ride booking backend: fare estimation and time-slot availability."""
