"""Account backend: signup, login, profile and SMS-code login."""
