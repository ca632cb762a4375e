"""
Mailtender: files known mailbox notifications as scheduled tasks.

A small batch pipeline that:
- Scans unread inbox messages and context-label folders
- Matches messages against registered sender/subject templates
- Extracts amounts, dates and links from the message body
- Sends each task to a capture endpoint and archives the message on success
"""

__version__ = "0.1.0"
