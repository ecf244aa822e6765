"""Agent command interpretation and dispatch.

The agent layer turns a free-form English instruction (plus optional structured data) into exactly one
CRUD operation against an HR table, and records an audit entry for every data-access attempt.
"""
