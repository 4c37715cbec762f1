"""
Instance selection for case-based learners.

Each algorithm reduces a labelled Dataset to a solution set and keeps,
for every surviving row, its position in the original dataset.
"""
