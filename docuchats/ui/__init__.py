"""NiceGUI interface - thin visualization layer over the DocuChats API.

Responsibilities:
    - Library page: PDF upload, document list, general chat
    - Reader page: paged text, sentence highlighting and read-aloud playback
    - Chat panel bound to the paragraph on screen
    - AI notes dialog

Contains minimal business logic. Documents, chat, notes and speech all go
through the API; only the playback state machine runs in the UI process.
"""
