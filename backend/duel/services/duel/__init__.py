"""Duel domain services: answer grading and scoring.

Kept free of request handling so actions and socket handlers can share it.
"""
