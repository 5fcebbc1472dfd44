"""
CLI Module.

The `osc` command line client built with Typer and Rich.

Architecture:
- One Typer group per service, one sub-group per resource
- Commands are thin: they build a binding request, run it through
  run_command() and hand the result to OutputProcessor
- Logs go to the log file, or to stderr with -v/-vv

Usage:
    osc --help
    osc --os-cloud devstack compute server list
"""
