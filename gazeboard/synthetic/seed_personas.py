import json, urllib.request
from ..config import DEFAULTS
from .personas import smooth_buyer, confused_buyer, abandoner

PERSONAS = (smooth_buyer, confused_buyer, abandoner)
BATCH = 250  # events per request; keeps one persona per POST or so

def post_events(events, url=None):
    req = urllib.request.Request(url or DEFAULTS["ingest_url"], data=json.dumps(events).encode("utf-8"),
                                 headers={"Content-Type": "application/json"})
    with urllib.request.urlopen(req) as r:
        return json.loads(r.read() or b"{}")

def seed(url=None):
    accepted = skipped = 0
    for persona in PERSONAS:
        events = persona()
        for i in range(0, len(events), BATCH):
            out = post_events(events[i:i+BATCH], url)
            accepted += out.get("accepted", 0)
            skipped += out.get("skipped", 0)
    return accepted, skipped

def main():
    accepted, skipped = seed()
    print(f"[seed] {accepted} events applied, {skipped} skipped across {len(PERSONAS)} personas → {DEFAULTS['ingest_url']}")

if __name__ == "__main__":
    main()
