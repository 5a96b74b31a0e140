"""Extension-side logic: article extraction in the page and the background message relay."""
