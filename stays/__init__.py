"""Vacation-rental booking engine: availability, pricing and booking lifecycle."""
