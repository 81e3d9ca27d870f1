"""Transactional email (account creation, password reset, news notification) via SES."""
