"""
Registry domain: records, the registry itself, and the errors it raises.

This package is responsible for:
* The pydantic records describing packages and their dependencies.
* The in-memory registry (name -> basic package record) and its CRUD rules.
* The exception hierarchy shared by storage, services and the HTTP layer.
"""
