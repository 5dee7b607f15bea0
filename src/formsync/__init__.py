"""
formsync: round-trip synchronisation for form definitions.

One canonical question model, several textual views:
    - form markup (parsed and regenerated)
    - a `{ "form": [...] }` payload document
    - code samples embedding that payload (Python, JavaScript, VBScript)

Logic rules and quotas have no place in markup; they are carried across
re-parses by the merger. Visibility and quota evaluation run against
end-user responses.

ARCHITECTURAL GUARANTEE:
------------------------
Every operation is a synchronous function over an explicit snapshot.
Nothing here keeps state between calls, renders widgets or persists
anything. The only I/O is the optional submission client.
"""

__version__ = "0.1.0"
