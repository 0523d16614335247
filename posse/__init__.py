"""
Posse - Bang! Game Session Server

A session server for the social deduction card game Bang!.
Players sign up, open or join a table, and the admin deals the game:
- Session lifecycle (recruiting, active, finished)
- Join-request arbitration by the table admin
- Role, character and card assignment at start
- Turn actions (life, card moves, reveal, end turn, finish)
"""

__version__ = "0.1.0"
