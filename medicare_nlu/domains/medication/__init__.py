"""
Medication Domain

Rule-based understanding of medication-management conversations.

Architecture:
- nlu/: Entity extraction, parsing, intent classification, conflict
  detection and reply generation
- assistant/: Rule-based chat assistant built on the NLU engine
"""

__all__: list[str] = []
