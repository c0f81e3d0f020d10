"""
Core types for the label table.
"""

type Token = bytes
type Label = int
type Labels = list[Label]
type TextLike = str | bytes
