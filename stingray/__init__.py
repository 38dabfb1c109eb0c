"""
Stingray - Coeur de lecture pour un serveur media compatible Jellyfin.

Ce package fournit les sessions de lecture (rapports de progression,
position de reprise), le choix de l'episode suivant et la correspondance
des pistes entre episodes.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (session de lecture, view-model)
- adapters/ : Couche infrastructure (client Jellyfin, profils JSON, CLI)
"""
