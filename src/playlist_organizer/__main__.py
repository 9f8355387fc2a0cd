from playlist_organizer.main import run

run()
