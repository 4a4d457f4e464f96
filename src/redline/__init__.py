"""Track-change extraction and review for Word .docx documents."""
