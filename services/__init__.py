"""Call manager services: storage, call sessions, dashboard statistics, voice."""
