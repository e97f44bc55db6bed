"""
MediCare NLU

Rule-based natural-language understanding for medication management:
entity extraction, medication parsing, intent classification, conflict
detection and contextual reply generation.
"""

__version__ = "0.1.0"
