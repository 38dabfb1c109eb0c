"""
Constantes globales pour Stingray.

Ce module regroupe les valeurs fixes de la lecture:
- Unite de temps du serveur (ticks)
- Seuils de finalisation de la position de reprise
- Intervalle du rapport de progression
- Parametres fixes du flux HLS
"""

# 1 tick = 100 nanosecondes
TICKS_PER_SECOND = 10_000_000

# Au-dela de 90% de la duree, l'episode est considere comme termine
FINISHED_THRESHOLD = 0.9

# En dessous de 10% de la duree, l'episode est considere comme non commence
BARELY_STARTED_THRESHOLD = 0.1

# Intervalle entre deux rapports de progression (secondes)
REPORT_INTERVAL_SECONDS = 1.0

# Debit utilise quand le serveur n'annonce pas celui d'une piste (bits/s)
DEFAULT_TRACK_BITRATE = 10_000

# AV1 n'est pas decode nativement, on demande plus de bits au transcodeur
AV1_BITRATE_FACTOR = 1.75

# Titre par defaut d'une piste sans DisplayTitle
UNKNOWN_TRACK_TITLE = "Unknown stream"

# Parametres fixes envoyes avec chaque demande de flux HLS
STREAM_PARAMETERS: tuple[tuple[str, str], ...] = (
    # Video
    ("videoCodec", "hevc,h264"),
    ("container", "mp4"),
    ("transcodingContainer", "mp4"),
    ("allowVideoStreamCopy", "true"),
    ("hevc-videobitdepth", "10"),
    ("hevc-rangetype", "SDR,HDR10,HDR10Plus,DOVI,DOVIWithHDR10,DOVIWithSDR,DOVIWithHDR10Plus"),
    ("hevc-level", "153"),
    ("hevc-profile", "main10"),
    ("hevc-codectag", "hvc1,dvh1"),
    ("deInterlace", "true"),
    ("h265-codectag", "hvc1,dvh1,dvhe"),
    # Audio
    ("audioCodec", "aac,ac3,eac3,alac,mp3"),
    ("allowAudioStreamCopy", "true"),
    ("enableAudioVbrEncoding", "true"),
    # Streaming
    ("breakOnNonKeyFrames", "true"),
    ("requireAVC", "false"),
    ("segmentContainer", "mp4"),
    ("copyTimestamps", "true"),
    ("enableAutoStreamCopy", "true"),
)
