# rwa_registry/cli/__init__.py
# Command-line front end: Router parses arguments, View prints results.
