"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites), et objets valeur.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (HTTP, fichiers, lecteur).

Sous-packages :
- entities/ : Entités métier (Track, MediaSource, Episode, Season, Movie, Series)
- ports/ : Interfaces abstraites (serveur media, profils utilisateur, lecteur)
- value_objects/ : Objets valeur immutables (Bitrate, PlaybackReport, TrackType)
"""
