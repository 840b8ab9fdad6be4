from flask import Blueprint, request, jsonify
from .models import db, User, DuelMatch, DuelPlayer
from flask_login import login_user, logout_user, login_required, current_user

main = Blueprint('main', __name__)

@main.route('/login', methods=['POST', 'OPTIONS'])
def login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=data.get('username')).first()
    if user and user.check_password(data.get('password') or ''):
        login_user(user)
        return jsonify({"success": True, "user": user.to_dict()})
    return jsonify({"success": False, "message": "Invalid credentials"}), 401

@main.route('/register', methods=['POST', 'OPTIONS'])
def register():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return jsonify({"success": False, "message": "Username and password are required"}), 400
    if User.query.filter_by(username=username).first():
        return jsonify({"success": False, "message": "Username already exists"}), 400

    new_user = User(username=username)
    new_user.set_password(password)
    db.session.add(new_user)
    db.session.commit()
    login_user(new_user)
    return jsonify({"success": True, "user": new_user.to_dict()}), 201

@main.route('/check_login', methods=['GET'])
@login_required
def check_login():
    return jsonify({"success": True, "user": current_user.to_dict()})

@main.route('/logout', methods=['POST', 'OPTIONS'])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})

@main.route('/matches/active')
@login_required
def get_active_matches():
    # Matches the current user owns or holds a seat in, excluding finished ones
    seated = db.select(DuelPlayer.match_id).where(DuelPlayer.user_id == current_user.id)
    found = (
        DuelMatch.query
        .filter(db.or_(DuelMatch.owner_id == current_user.id, DuelMatch.id.in_(seated)))
        .filter(DuelMatch.status.in_(('waiting', 'in_progress')))
        .order_by(DuelMatch.id)
        .all()
    )
    return jsonify([m.to_dict() for m in found])
