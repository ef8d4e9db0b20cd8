#!/usr/bin/env python3
import os
import logging

import uvicorn
from dotenv import load_dotenv

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Load environment variables, with fallback values
if os.path.exists('.env'):
    load_dotenv()
else:
    logger.warning('.env file not found, using default values')

from sos_scanner.gateway.app.main import app  # noqa: E402

if __name__ == '__main__':
    try:
        port = int(os.getenv('PORT', 5000))
        logger.info(f'Starting scanner gateway on port {port}')
        uvicorn.run(app, host='0.0.0.0', port=port)
    except Exception as e:
        logger.error(f'Failed to start application: {str(e)}')
        raise
