"""
Web UI for Manga Catalog
Provides a small dashboard and a JSON API over the entry store.
"""

import html
import logging
import threading
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from . import __version__
from .errors import EntryNotFoundError, EntryValidationError, StorageError
from .models import Category, EntryDraft, Rating
from .notifications import LogNotifier
from .query import ViewCriteria, view
from .stats import summarize
from .store import EntryStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Manga Catalog", version=__version__)

# Store served by the app (set by CLI when web UI starts)
_store: Optional[EntryStore] = None

# Threading lock so concurrent requests never interleave mutations
_store_lock = threading.Lock()


def set_store(store: EntryStore) -> None:
    """Install the store the API operates on."""
    global _store
    _store = store


def get_store() -> EntryStore:
    """FastAPI dependency returning the active store."""
    if _store is None:
        raise HTTPException(status_code=503, detail="Catalog is not loaded")
    return _store


def _validation_error(error: EntryValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=error.messages)


def _options(values, blank_label: Optional[str] = None) -> str:
    """Render <option> tags for a select."""
    options = [f'<option value="">{blank_label}</option>'] if blank_label else []
    options += [f'<option value="{html.escape(v)}">{html.escape(v)}</option>' for v in values]
    return "".join(options)


@app.get("/", response_class=HTMLResponse)
async def dashboard():
    """Main dashboard page"""
    categories = [c.value for c in Category]
    ratings = [r.value for r in Rating]
    html_content = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Manga Catalog</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            background: linear-gradient(135deg, #312e81 0%, #831843 100%);
            min-height: 100vh;
            padding: 20px;
        }
        .container { max-width: 1100px; margin: 0 auto; }
        .header { text-align: center; color: white; margin-bottom: 30px; }
        .header h1 { font-size: 2.5em; margin-bottom: 10px; }
        .card {
            background: white;
            border-radius: 12px;
            padding: 25px;
            margin-bottom: 20px;
            box-shadow: 0 10px 30px rgba(0, 0, 0, 0.2);
        }
        .card h2 { color: #4f46e5; margin-bottom: 15px; font-size: 1.3em; }
        .toolbar, .form-row { display: flex; gap: 10px; margin-bottom: 15px; flex-wrap: wrap; }
        input, select { padding: 8px; border: 1px solid #ddd; border-radius: 6px; }
        .btn {
            padding: 8px 16px;
            background: #4f46e5;
            color: white;
            border: none;
            border-radius: 6px;
            cursor: pointer;
            font-weight: 600;
        }
        .btn-secondary { background: #9ca3af; }
        .btn-danger { background: #dc2626; }
        table { width: 100%; border-collapse: collapse; }
        th, td { text-align: left; padding: 8px; border-bottom: 1px solid #eee; }
        .stat { display: inline-block; margin-right: 30px; }
        .stat strong { font-size: 1.6em; color: #111; display: block; }
        .message { margin-top: 10px; color: #991b1b; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>📚 Manga Catalog</h1>
            <p>Organize and rate your favourite series</p>
        </div>
        <div class="card">
            <h2>📊 Stats</h2>
            <div id="stats">Loading...</div>
        </div>
        <div class="card">
            <h2 id="form-title">➕ Add Entry</h2>
            <form id="entry-form" onsubmit="submitEntry(event)">
                <input type="hidden" id="entry-id">
                <div class="form-row">
                    <input id="entry-name" placeholder="Name" required>
                    <select id="entry-category">{{CATEGORY_OPTIONS}}</select>
                    <select id="entry-rating">{{RATING_OPTIONS}}</select>
                </div>
                <div class="form-row">
                    <input id="entry-link" placeholder="Link">
                    <input id="entry-last-position" placeholder="Last chapter">
                    <input id="entry-view-date" type="date">
                </div>
                <button class="btn" type="submit" id="save-btn">💾 Save</button>
                <button class="btn btn-secondary" type="button" onclick="resetForm()">Cancel</button>
                <div class="message" id="form-message"></div>
            </form>
        </div>
        <div class="card">
            <h2>📖 Collection</h2>
            <div class="toolbar">
                <input id="search" placeholder="Search by name..." oninput="loadEntries()">
                <select id="filter-category" onchange="loadEntries()">{{CATEGORY_FILTER}}</select>
                <select id="filter-rating" onchange="loadEntries()">{{RATING_FILTER}}</select>
                <select id="sort" onchange="loadEntries()">
                    <option value="name">Name</option>
                    <option value="rating">Rating</option>
                    <option value="category">Category</option>
                    <option value="viewDate">Date</option>
                </select>
                <select id="order" onchange="loadEntries()">
                    <option value="asc">↑</option>
                    <option value="desc">↓</option>
                </select>
                <button class="btn btn-secondary" id="clear-filters" onclick="clearFilters()">Clear filters</button>
            </div>
            <table>
                <thead><tr><th>Rating</th><th>Name</th><th>Category</th><th>Last</th><th>Viewed</th><th></th></tr></thead>
                <tbody id="entries"></tbody>
            </table>
        </div>
        <div style="text-align:center;color:white;opacity:0.8">Manga Catalog v{{VERSION}}</div>
    </div>
    <script>
        function cell(text) {
            const td = document.createElement('td');
            td.textContent = text || '-';
            return td;
        }

        function button(label, className, onClick) {
            const btn = document.createElement('button');
            btn.textContent = label;
            btn.className = 'btn ' + className;
            btn.onclick = onClick;
            return btn;
        }

        async function loadEntries() {
            const params = new URLSearchParams({
                search: document.getElementById('search').value,
                category: document.getElementById('filter-category').value,
                rating: document.getElementById('filter-rating').value,
                sort: document.getElementById('sort').value,
                order: document.getElementById('order').value,
            });
            const response = await fetch('/api/entries?' + params);
            const entries = await response.json();
            const body = document.getElementById('entries');
            body.replaceChildren();
            for (const entry of entries) {
                const row = document.createElement('tr');
                [entry.rating, entry.name, entry.category, entry.lastPosition, entry.viewDate]
                    .forEach(value => row.appendChild(cell(value)));
                const actions = document.createElement('td');
                actions.appendChild(button('✏️', 'btn-secondary', () => editEntry(entry)));
                actions.appendChild(button('🗑️', 'btn-danger', () => deleteEntry(entry)));
                row.appendChild(actions);
                body.appendChild(row);
            }
        }

        async function loadStats() {
            const response = await fetch('/api/stats');
            const stats = await response.json();
            const container = document.getElementById('stats');
            container.replaceChildren();
            const addStat = (value, label) => {
                const div = document.createElement('div');
                div.className = 'stat';
                const strong = document.createElement('strong');
                strong.textContent = value;
                div.appendChild(strong);
                div.appendChild(document.createTextNode(label));
                container.appendChild(div);
            };
            addStat(stats.total, 'Total');
            addStat(stats.recent_count, 'Last 30 days');
            for (const [category, count] of Object.entries(stats.by_category)) {
                addStat(count, category);
            }
            const ratings = document.createElement('p');
            ratings.style.marginTop = '10px';
            ratings.textContent = 'Ratings: ' + (stats.by_rating.map(r => `${r.rating}: ${r.count}`).join(', ') || '-');
            container.appendChild(ratings);
        }

        function clearFilters() {
            document.getElementById('search').value = '';
            document.getElementById('filter-category').value = '';
            document.getElementById('filter-rating').value = '';
            loadEntries();
        }

        function resetForm() {
            document.getElementById('entry-form').reset();
            document.getElementById('entry-id').value = '';
            document.getElementById('form-title').textContent = '➕ Add Entry';
            document.getElementById('form-message').textContent = '';
        }

        function editEntry(entry) {
            document.getElementById('entry-id').value = entry.id;
            document.getElementById('entry-name').value = entry.name;
            document.getElementById('entry-category').value = entry.category;
            document.getElementById('entry-rating').value = entry.rating;
            document.getElementById('entry-link').value = entry.link || '';
            document.getElementById('entry-last-position').value = entry.lastPosition || '';
            document.getElementById('entry-view-date').value = entry.viewDate || '';
            document.getElementById('form-title').textContent = '✏️ Edit Entry';
        }

        async function submitEntry(event) {
            event.preventDefault();
            const id = document.getElementById('entry-id').value;
            const payload = {
                name: document.getElementById('entry-name').value,
                category: document.getElementById('entry-category').value,
                rating: document.getElementById('entry-rating').value,
                link: document.getElementById('entry-link').value,
                lastPosition: document.getElementById('entry-last-position').value,
                viewDate: document.getElementById('entry-view-date').value || null,
            };
            const response = await fetch(id ? `/api/entries/${encodeURIComponent(id)}` : '/api/entries', {
                method: id ? 'PUT' : 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(payload),
            });
            if (!response.ok) {
                const error = await response.json();
                document.getElementById('form-message').textContent = JSON.stringify(error.detail);
                return;
            }
            resetForm();
            refresh();
        }

        async function deleteEntry(entry) {
            if (!confirm(`Remove ${entry.name} from your collection?`)) {
                return;
            }
            await fetch(`/api/entries/${encodeURIComponent(entry.id)}`, { method: 'DELETE' });
            refresh();
        }

        function refresh() {
            loadEntries();
            loadStats();
        }

        refresh();
    </script>
</body>
</html>
"""
    html_content = (
        html_content
        .replace("{{CATEGORY_OPTIONS}}", _options(categories))
        .replace("{{RATING_OPTIONS}}", _options(ratings))
        .replace("{{CATEGORY_FILTER}}", _options(categories, "All categories"))
        .replace("{{RATING_FILTER}}", _options(ratings, "All ratings"))
        .replace("{{VERSION}}", __version__)
    )
    return HTMLResponse(content=html_content)


@app.get("/api/health")
async def health(store: EntryStore = Depends(get_store)):
    """Report whether the saved collection loaded cleanly."""
    return {
        "healthy": store.load_error is None,
        "entries": len(store),
        "load_error": str(store.load_error) if store.load_error else None,
    }


@app.get("/api/entries")
def list_entries(
    search: str = "",
    category: str = "",
    rating: str = "",
    sort: str = "name",
    order: str = "asc",
    store: EntryStore = Depends(get_store),
):
    """List entries with search, filters and sorting."""
    try:
        criteria = ViewCriteria(
            search_text=search,
            category=category,
            rating=rating,
            sort_key=sort,
            direction=order,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=EntryValidationError.from_pydantic(e).messages)
    return [entry.to_document() for entry in view(store.entries, criteria)]


@app.get("/api/entries/{entry_id}")
def get_entry(entry_id: str, store: EntryStore = Depends(get_store)):
    """Get a single entry."""
    entry = store.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Entry not found: {entry_id}")
    return entry.to_document()


@app.post("/api/entries", status_code=201)
def create_entry(draft: EntryDraft, store: EntryStore = Depends(get_store)):
    """Add a new entry."""
    with _store_lock:
        try:
            entry = store.add(draft)
        except EntryValidationError as e:
            raise _validation_error(e)
        except StorageError as e:
            logger.error(f"Failed to save new entry: {e}")
            raise HTTPException(status_code=500, detail="Failed to save collection")
    return entry.to_document()


@app.put("/api/entries/{entry_id}")
def update_entry(entry_id: str, draft: EntryDraft, store: EntryStore = Depends(get_store)):
    """Replace an existing entry's fields."""
    fields = draft.model_dump()
    fields["id"] = entry_id
    with _store_lock:
        try:
            entry = store.update(fields)
        except EntryNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except EntryValidationError as e:
            raise _validation_error(e)
        except StorageError as e:
            logger.error(f"Failed to save entry {entry_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save collection")
    return entry.to_document()


@app.delete("/api/entries/{entry_id}")
def delete_entry(entry_id: str, store: EntryStore = Depends(get_store)):
    """Remove an entry; removing a missing id is a no-op."""
    with _store_lock:
        try:
            removed = store.remove(entry_id)
        except StorageError as e:
            logger.error(f"Failed to remove entry {entry_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save collection")
    return {"removed": removed, "id": entry_id}


@app.get("/api/stats")
def get_stats(store: EntryStore = Depends(get_store)):
    """Collection statistics; ratings in canonical order."""
    stats = summarize(store.entries)
    return {
        "total": stats.total,
        "by_category": {category.value: count for category, count in stats.by_category.items()},
        "by_rating": [{"rating": rating.value, "count": count} for rating, count in stats.by_rating],
        "recent_count": stats.recent_count,
    }


@app.get("/api/notices")
def get_notices(limit: int = Query(10, ge=0), store: EntryStore = Depends(get_store)):
    """Recent notices, newest first."""
    notifier = store.notifier
    if not isinstance(notifier, LogNotifier):
        return []
    return [notice.model_dump(mode="json") for notice in notifier.recent(limit)]
