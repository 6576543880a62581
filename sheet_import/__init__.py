"""Google Sheets -> GoHighLevel contact import."""
