#Vehicle availability transitions consumed by the dispatcher and the rest of the app.
