"""Host framework adapters, one submodule per framework.

A submodule imports only its own framework, so a project needs just the
hosts it generates dispatchers for.
"""
