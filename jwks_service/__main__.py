from jwks_service.main import run

run()
