"""
Core of a package registry web client.

This package is responsible for:
* Restoring, creating and clearing the persisted login session.
* Loading the package catalog from the registry once per startup.
* Prefix search with match highlighting for the autocomplete box.
* Sequencing these steps into a single startup procedure.
"""
