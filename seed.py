from studysync import create_app, db
from studysync.models import User, LibraryRoom, Seat, FlashcardDeck, Flashcard
from werkzeug.security import generate_password_hash

app = create_app()

with app.app_context():
    db.create_all()

    # Demo student
    user = User.query.filter_by(email='student@studysync.edu').first()
    if not user:
        user = User(
            name='Demo Student',
            email='student@studysync.edu',
            password_hash=generate_password_hash('password', method='pbkdf2:sha256'),
            department='Computer Science'
        )
        db.session.add(user)
        print("User created (student@studysync.edu/password)")

    # Rooms below capacity 10 are booked whole, the rest seat by seat
    rooms_data = [
        {"name": "Group Study Room A", "room_number": "01", "floor_number": 1, "capacity": 6,
         "features": ["whiteboard", "tv"], "size_sqft": 180},
        {"name": "Silent Study Hall", "room_number": "05", "floor_number": 1, "capacity": 20,
         "features": ["power_outlets", "computers"], "size_sqft": 900},
        {"name": "Meeting Room B", "room_number": "12", "floor_number": 2, "capacity": 8,
         "features": ["projector", "whiteboard"], "size_sqft": 220},
        {"name": "Conference Room", "room_number": "03", "floor_number": 3, "capacity": 12,
         "features": ["projector", "video_conferencing"], "size_sqft": 400},
    ]

    for r_data in rooms_data:
        if LibraryRoom.query.filter_by(name=r_data['name']).first():
            continue
        room = LibraryRoom(**r_data)
        db.session.add(room)
        db.session.flush()
        if room.capacity >= app.config['ROOM_MODE_CAPACITY_THRESHOLD']:
            for n in range(1, room.capacity + 1):
                db.session.add(Seat(
                    room_id=room.id,
                    seat_number=str(n),
                    position_x=(n - 1) % 5,
                    position_y=(n - 1) // 5,
                    has_computer='computers' in room.features and n <= 4,
                    has_power_outlet=n % 2 == 0,
                    is_accessible=n == 1
                ))
        print(f"Room {room.name} created.")

    db.session.flush()
    if not FlashcardDeck.query.filter_by(user_id=user.id).first():
        deck = FlashcardDeck(user_id=user.id, title='Data Structures', color='blue')
        db.session.add(deck)
        db.session.flush()
        cards = [
            ("What is the average lookup time of a hash table?", "O(1)"),
            ("Which structure is LIFO?", "A stack"),
            ("What is the height of a balanced BST with n nodes?", "O(log n)"),
        ]
        for question, answer in cards:
            db.session.add(Flashcard(deck_id=deck.id, question=question, answer=answer))
        print(f"Deck {deck.title} created.")

    db.session.commit()
    print("Database seeded successfully.")
