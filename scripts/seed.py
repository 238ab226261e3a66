"""Database seeder: users, posts, comments and likes with consistent counters."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta

from app.config import settings
from app.database import engine, async_session, Base
from app.models import Comment, CommentLike, Post, PostLike, User, UserRole
from app.security import hash_password

TOPICS = ["python", "fastapi", "postgresql", "docker", "testing", "travel",
          "cooking", "hiking", "photography", "books"]


async def seed(small: bool = False):
    num_users = 10 if small else 50
    num_posts = 100 if small else 5000
    max_comments_per_post = 2 if small else 5

    print(f"Seeding: {num_users} users, {num_posts} posts, up to {max_comments_per_post} comments each")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # One hash shared by every seeded account.
    password_hash = hash_password("password123")

    async with async_session() as session:
        users = [User(
            username="admin",
            email="admin@example.com",
            password_hash=password_hash,
            role=UserRole.ADMIN,
        )]
        for i in range(num_users):
            users.append(User(
                username=f"user_{i:04d}",
                email=f"user_{i:04d}@example.com",
                password_hash=password_hash,
                role=UserRole.USER,
            ))
        session.add_all(users)
        await session.flush()
        print(f"  Created {len(users)} users (login: admin / password123)")

        total_comments = total_post_likes = total_comment_likes = 0
        batch_size = 500
        for batch_start in range(0, num_posts, batch_size):
            batch_end = min(batch_start + batch_size, num_posts)
            posts = []
            for i in range(batch_start, batch_end):
                topic = random.choice(TOPICS)
                posts.append(Post(
                    title=f"Post {i}: notes on {topic}",
                    content=f"This is the full content of post {i} about {topic}. " * 10,
                    created_at=datetime.now(timezone.utc) - timedelta(minutes=random.randint(0, 525600)),
                    user_id=random.choice(users).id,
                    like_count=0,
                ))
            session.add_all(posts)
            await session.flush()

            comments = []
            for post in posts:
                # Likes come from distinct non-owners so the unique constraint holds.
                # Administrators may not like posts.
                fans = random.sample(
                    [u for u in users if u.id != post.user_id and u.role != UserRole.ADMIN],
                    k=random.randint(0, 5),
                )
                session.add_all(PostLike(user_id=u.id, post_id=post.id) for u in fans)
                post.like_count = len(fans)
                total_post_likes += len(fans)

                for _ in range(random.randint(0, max_comments_per_post)):
                    comments.append(Comment(
                        content=f"Comment by a reader on {post.title!r}.",
                        post_id=post.id,
                        user_id=random.choice(users).id,
                        like_count=0,
                    ))
            session.add_all(comments)
            await session.flush()
            total_comments += len(comments)

            for comment in comments:
                fans = random.sample([u for u in users if u.id != comment.user_id], k=random.randint(0, 2))
                session.add_all(CommentLike(user_id=u.id, comment_id=comment.id) for u in fans)
                comment.like_count = len(fans)
                total_comment_likes += len(fans)
            await session.flush()

            print(f"  Batch {batch_start}-{batch_end}: posts created")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s ({settings.DATABASE_URL.split('@')[-1]})")
    print(f"  Users: {len(users)}")
    print(f"  Posts: {num_posts}")
    print(f"  Comments: {total_comments}")
    print(f"  Post likes: {total_post_likes}")
    print(f"  Comment likes: {total_comment_likes}")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (100 posts)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
