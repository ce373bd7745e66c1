"""Playback surface implementations"""
