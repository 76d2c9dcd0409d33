"""
Slidewright deck CLI — deckctl command-line interface.

Usage:
    python -m slidewright.deck.cli.deckctl render <presentation.json>
    python -m slidewright.deck.cli.deckctl plan <presentation.json>
    python -m slidewright.deck.cli.deckctl show <workspace>
    python -m slidewright.deck.cli.deckctl kernels
"""

from slidewright.deck.cli.deckctl import main
