# tileplot/config/defaults.py
"""Default configuration values"""

# Rendering defaults
RENDERING = {
    'width': 1000,
    'height': 1000,
    'color': 'black',
    'vertical_flip': False,
    'keep_aspect_ratio': True,
    'show_borders': False,
    'border_color': 'gray',
    'overwrite': False,
    'point_size': 1,
}

# Local/distributed selection and worker pool
PARTITIONING = {
    'block_size_mb': 64,
    'local_block_threshold': 3,  # distributed when size / block_size exceeds this
    'max_workers': None,         # auto-detect if None
    'cpu_safety_factor': 1.0,
    'executor': 'process',       # process, thread
}

LOGGING = {
    'level': 'INFO',
    'console': True,
    'file': None,                # JSON log file, disabled when None
    'max_file_size': 50 * 1024 * 1024,
    'backup_count': 3,
}
