"""Playback data models"""
