"""Inbound goods: incoming schedules, product receipts and their HTTP routes."""