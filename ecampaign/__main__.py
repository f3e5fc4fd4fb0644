# ecampaign/__main__.py
# Development server: python -m ecampaign

from ecampaign import app, db

if __name__ == "__main__":
    with app.app_context():
        db.create_all()
    app.run(host="0.0.0.0", port=app.config['PORT'])
