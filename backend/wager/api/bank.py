from flask import Blueprint, jsonify, request
from wager import db
from wager.models import Category, Question
from wager.services import sync

bank = Blueprint('bank', __name__)


def _clean(data, key):
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ''


@bank.route('/categories', methods=['GET'])
def list_categories():
    return jsonify(sync.build_snapshot_data('categories'))


@bank.route('/categories', methods=['POST'])
def add_category():
    """
    Creates a category: a name plus the two options every one of its
    questions is answered with.
    """
    data = request.get_json(silent=True) or {}
    name, option1, option2 = _clean(data, 'name'), _clean(data, 'option1'), _clean(data, 'option2')
    if not all([name, option1, option2]):
        return jsonify({'error': 'Category name and both options are required'}), 400
    if option1 == option2:
        return jsonify({'error': 'The two options must differ'}), 400

    category = Category(name=name, option1=option1, option2=option2)
    db.session.add(category)
    db.session.commit()

    sync.publish('categories')
    return jsonify(category.to_dict()), 201


@bank.route('/categories/<string:category_id>', methods=['DELETE'])
def delete_category(category_id):
    # Questions that still point here are skipped when the next playlist is built
    category = db.session.get(Category, category_id)
    if not category:
        return jsonify({'error': 'Category not found'}), 404
    db.session.delete(category)
    db.session.commit()

    sync.publish('categories')
    return jsonify({'message': 'Category deleted'}), 200


@bank.route('/questions', methods=['GET'])
def list_questions():
    category_id = request.args.get('category_id')
    questions = sync.build_snapshot_data('questions')
    if category_id:
        questions = [q for q in questions if q['category_id'] == category_id]
    return jsonify(questions)


@bank.route('/questions', methods=['POST'])
def add_question():
    """
    Adds a term to a category. The correct answer must be one of the
    category's two options.
    """
    data = request.get_json(silent=True) or {}
    term, correct_answer = _clean(data, 'term'), _clean(data, 'correct_answer')
    category_id = data.get('category_id')
    if not all([term, correct_answer, category_id]):
        return jsonify({'error': 'Term, correct answer and category are required'}), 400

    category = db.session.get(Category, category_id)
    if not category:
        return jsonify({'error': 'Category not found'}), 404
    if correct_answer not in (category.option1, category.option2):
        return jsonify({'error': f'Correct answer must be {category.option1} or {category.option2}'}), 400

    question = Question(
        term=term,
        correct_answer=correct_answer,
        category_id=category.id,
        category_name=category.name,
    )
    db.session.add(question)
    db.session.commit()

    sync.publish('questions')
    return jsonify(question.to_dict()), 201


@bank.route('/questions/<string:question_id>', methods=['DELETE'])
def delete_question(question_id):
    question = db.session.get(Question, question_id)
    if not question:
        return jsonify({'error': 'Question not found'}), 404
    db.session.delete(question)
    db.session.commit()

    sync.publish('questions')
    return jsonify({'message': 'Question deleted'}), 200
