import logging, uvicorn

from papervault.config import HOST, LOG_LEVEL, PORT

def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("papervault.main:app", host=HOST, port=PORT, reload=False)

if __name__ == "__main__":
    main()
