"""Client-side runtime helpers: polling, visibility, debounce and drafts."""
