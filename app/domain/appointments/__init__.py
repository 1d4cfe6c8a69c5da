"""Appointments domain - booking lifecycle engine"""
