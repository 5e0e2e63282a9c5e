"""Shared Kernel module.

Identity resolution, the role and realm vocabulary, the organization context
and backing store errors. These are shared by the IAM and realtime bounded
contexts; changes here affect both and should be coordinated.
"""
