"""Client roster export.

Pulls the paginated client roster from the source API, enriches each page
with live statuses, and appends the merged rows to a Google Sheets
worksheet with rate-limit aware batching.
"""
