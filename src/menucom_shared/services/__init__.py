"""Domain services for the menucom payments API."""
