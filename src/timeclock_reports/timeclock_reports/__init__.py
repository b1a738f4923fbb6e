"""Timeclock Reports package.

Feature modules (punches, sessions, breaks, sites, reports) each carry a
model, a repository interface with its MySQL implementation, and a service.
A thin Flask controller layer sits on top of the report service.
"""
