"""
Interface package: human-facing front ends for the Gobblet engine.

Modules:
    notation: Cell/move notation, move parsing, board rendering.
    console:  Interactive human-versus-engine game on stdin/stdout.
              Can be run as a standalone script: python interface/console.py
"""
